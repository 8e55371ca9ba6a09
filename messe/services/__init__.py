"""
Business operations behind the API.

Blueprints parse requests and call these functions; every failure is raised
as a messe.exceptions.MesseError subclass.
"""
