"""
Services for JobPrep.

- lifecycle: Test acquisition, scoring and application status
- resumes: Resume upload, parsing and storage
- job_search: Web search + AI analysis of job listings
"""
