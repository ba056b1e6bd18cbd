"""Domain services of the crowdfunding core.

Each service takes the EntityStore it works on in its constructor.
"""
