"""
Hospital records backend (doctors and patients).

Layout:
- settings.py   : configuration from environment / .env
- db.py         : SQLAlchemy engine, sessions and unit of work
- models.py     : ORM models and EmployeeStatus
- stores.py     : named queries over doctors and patients
- schemas.py    : request / response payloads and their field rules
- services.py   : doctor and patient use cases
- api_main.py   : FastAPI application
- seed.py       : reference data
- cli.py        : command line access to the same use cases
"""
