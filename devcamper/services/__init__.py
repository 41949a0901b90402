"""
DevCamper API — Services Layer
===============================

What:  Business rules between the routes (HTTP) and the models (persistence).

Service Inventory:
    - query_service:     advanced-results list query translator
    - aggregate_service: average cost / average rating recompute
    - security:          password hashing, bearer tokens, reset tokens
    - geocoder:          Geocoder interface + MapQuest / Nominatim providers
    - email_service:     SMTP delivery
    - file_service:      bootcamp photo validation and storage
    - auth_service, bootcamp_service, course_service, review_service,
      user_service:      resource operations

Resource services are stateless singletons; collaborators that depend on
configuration (security, geocoder, mailer, file storage) are built by
`create_app()` and passed in per call.
"""
