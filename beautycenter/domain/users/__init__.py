"""Users domain - Staff accounts and roles"""
