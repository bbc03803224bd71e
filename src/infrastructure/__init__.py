"""
Couche infrastructure de Monynha Fun.

Implementations concretes des ports du domaine :

- persistence/ : Store local SQLite avec SQLModel

Le store distant (Supabase) se trouve dans src/adapters/api/.
"""
