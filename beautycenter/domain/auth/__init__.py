"""Auth domain - Login, registration and token checks"""
