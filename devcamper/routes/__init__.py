"""
DevCamper API — Routes Package
===============================

What:  HTTP route handlers, one module per resource, all under /api/v1.

Route Inventory:
    - auth.py:       register, login, logout, me, details/password updates,
                     forgot/reset password
    - users.py:      admin CRUD on users
    - bootcamps.py:  bootcamp CRUD, radius search, photo upload
    - courses.py:    /courses and /bootcamps/{bootcamp_id}/courses
    - reviews.py:    /reviews and /bootcamps/{bootcamp_id}/reviews
    - health.py:     GET /health

Routes stay thin: parse the request, run the guard dependencies, call one
service method, wrap the result in the `{success, data}` envelope.
"""
