"""
Tenants app - школы (tenants) на одном движке.

Модель данных:
    School ← N User (учителя назначаются при регистрации, ученики - через класс)
    School ← N Classroom
    School ← N CurriculumWeek (копия мастер-программы, снимается при подключении)
"""
