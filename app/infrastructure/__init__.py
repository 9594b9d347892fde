"""
Infrastructure layer for the freelance marketplace.

This layer contains the implementation details for external systems integration:
- Database (SQLAlchemy with PostgreSQL)
- Authentication (Supabase Auth)
- File Storage (Supabase Storage)
- Email notifications and realtime delivery

The infrastructure layer implements interfaces defined in the domain layer,
following the Dependency Inversion Principle of Clean Architecture.
"""
