"""
DeepHand form submission service: validation, wizard state, submission handling and email notification.
"""
