"""Bookings domain - intake, technician assignment, status progression and tracking"""
