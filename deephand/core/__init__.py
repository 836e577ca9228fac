"""
Shared form schema, wizard state machine, submission client and request handler.
"""
