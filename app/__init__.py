"""Crowdfunding proposal core: proposals, staked votes, impact scores and approvals."""
