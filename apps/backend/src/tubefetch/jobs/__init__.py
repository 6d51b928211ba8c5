"""Download job tracking for TubeFetch."""

from tubefetch.jobs.manager import JobManager
from tubefetch.jobs.models import Job, JobStatus

__all__ = ["Job", "JobManager", "JobStatus"]
