"""Technicians domain - the roster bookings are assigned to"""
