"""SMTP mailing, bulk sending, POP3 checks, mail log statistics and search."""