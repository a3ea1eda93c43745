"""Reading room ledger package.

Organized by feature modules (students, notifications) with a thin Flask
controller layer over service/repository layers.
"""
