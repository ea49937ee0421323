"""
Document feedback pipeline.

Submodules:
    runner: FeedbackJobRunner, drives one job through the five stages
    scheduler: FeedbackJobScheduler, background runs with a timeout
    database: FeedbackJobStatusUpdater, job record writes
    interfaces: DocumentSource and FeedbackContentGenerator capabilities
"""
