from jobdesk.models.job import JobDescription, JobStatus
from jobdesk.models.user import User
