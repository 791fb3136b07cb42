"""
Adapters - implementações concretas das portas do Core.
"""
