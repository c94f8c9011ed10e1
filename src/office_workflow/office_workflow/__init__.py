"""Office Workflow package.

Feature modules (employees, leave, devices, bookings) each carry a model,
a repository interface, a MySQL repository and a service. Controllers are a
thin JSON layer over the services.
"""
