from app.repositories.attendance.roll_call import RollCallRepository

__all__ = ["RollCallRepository"]
