"""
Clinic Domain Layer

Components:
- Entities: Treatment, Prescription, Billing, Appointment (aggregate roots)
- Value Objects: statuses, VitalSigns, ScheduleWindow, BusySlot
- Domain Services: SlotGenerator, BusySlotMerger, DisabledDayPredicate, BillingComposer
"""
