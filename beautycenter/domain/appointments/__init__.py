"""Appointments domain - Booking, conflict checks and the appointment lifecycle"""
