from .booking_controller import booking_bp

__all__ = ["booking_bp"]
