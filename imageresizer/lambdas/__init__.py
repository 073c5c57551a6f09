"""
AWS Lambda entry points.

  upload/   — API Gateway POST /upload, writes the original to the source bucket
  resize/   — S3 ObjectCreated trigger, writes one variant per target size
  get_url/  — API Gateway GET /get-url, returns presigned GET URLs
"""
