"""Services domain - The treatments a company offers"""
