"""Routing: pattern compilation and an ordered route table.

Routes are compiled once at registration and matched in registration
order.
"""
