"""Beauty center management API"""
