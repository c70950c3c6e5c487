"""
qaboard: a small FastAPI backend behind a Q&A site.

Form submissions (questions, answers, contact queries and newsletter emails)
are written to DynamoDB and announced on an SNS topic; listings and the site
pages are served straight back out.
"""
