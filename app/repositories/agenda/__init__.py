from app.repositories.agenda.initiative import InitiativeRepository

__all__ = ["InitiativeRepository"]
