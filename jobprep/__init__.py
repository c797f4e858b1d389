"""
JobPrep Backend.

Core components:
- services: Application lifecycle (tests + scoring), resumes, job search
- agents: Resume parser, job analyzer, test generator
- tools: PDF parser, search APIs
- models: Data models for resumes, jobs and tests
"""
