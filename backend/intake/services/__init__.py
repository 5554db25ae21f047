# Services package init
"""
Form Intake Service — Services Layer
=====================================

Service Inventory:
    - InquiryService: INSERT … RETURNING for any form kind, with rollback
      and DatabaseError translation on failure
    - MailService:    HTML notification email over SMTP, fire-and-forget
"""
