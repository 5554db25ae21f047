# Routes package init
"""
Form Intake Service — API Routes Package
=========================================

Route Inventory:
    - submissions.py:  POST /submit-form          (study abroad)
                       POST /submit-work-form     (work abroad)
                       POST /submit-invest-form   (investment)
    - health.py:       GET  /health

Routes stay thin: parse the body, call InquiryService, schedule the email,
wrap the row in the success envelope.
"""
