"""Locations domain - Company branches"""
