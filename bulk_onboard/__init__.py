"""Tenant-scoped bulk onboarding of students and employees from spreadsheets."""
