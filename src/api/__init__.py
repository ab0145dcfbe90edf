"""
API Module
---------
Provides RESTful API endpoints for the park catalog using FastAPI.
Features include:
- Listing parks and retrieving a park by its park code
- Creating, updating and deleting parks
- Searching parks by distance and activity
"""
