"""Appointments module: booking, doctor status updates and patient cancellation."""
