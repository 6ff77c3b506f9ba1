"""Companies domain - Tenant companies"""
