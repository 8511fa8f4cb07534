"""Society operations engine: maintenance billing, amenity booking, visitor sessions, complaints."""

__version__ = "0.1.0"
