"""
Blog content sync - keeps an in-memory cache of posts and site
configuration in step with a content repository.
"""
