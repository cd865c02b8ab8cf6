"""
Screen annotator session engine.

Reconciles independently uploaded session artifacts (video, metadata,
annotation log) stored in S3 into browsable recording sessions.
"""
