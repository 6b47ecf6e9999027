# jackemate/services/__init__.py
# Business logic; every function takes the SQLAlchemy session first.
