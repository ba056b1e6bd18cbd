"""Application-wide constants."""

# Impact score weights (energy efficiency, community benefit, innovation factor)
ENERGY_EFFICIENCY_WEIGHT = 0.4
COMMUNITY_BENEFIT_WEIGHT = 0.4
INNOVATION_FACTOR_WEIGHT = 0.2
MIN_IMPACT_SCORE = 0.0
MAX_IMPACT_SCORE = 10.0

# Sub-metric bounds; 0 stands for "not supplied"
MIN_METRIC = 1
MAX_METRIC = 10

# Proposal submission bounds
MIN_TITLE_LENGTH = 5
MIN_DESCRIPTION_LENGTH = 20
MIN_CATEGORY_LENGTH = 2
MIN_FUNDING_GOAL = 100
MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 180

# Smallest stake a vote may commit
MIN_STAKE = 1

# Sample proposals used to populate an empty store, with their initial raised amounts
SAMPLE_PROPOSALS = [
    {
        "title": "Metaverse Art Gallery",
        "description": "A virtual gallery to showcase NFT artwork from emerging artists in an immersive environment.",
        "category": "Art & Culture",
        "creator_address": "0x7fe3...4c21",
        "funding_goal": 5000,
        "duration": 14,
        "raised_amount": 2450,
    },
    {
        "title": "DeFi Education Platform",
        "description": "Interactive learning platform to help newcomers understand blockchain technology and DeFi protocols.",
        "category": "Education",
        "creator_address": "0x3ab1...9e57",
        "funding_goal": 10000,
        "duration": 3,
        "raised_amount": 8340,
    },
    {
        "title": "Carbon Offset DAO",
        "description": "Decentralized organization focused on funding verified carbon offset projects worldwide.",
        "category": "Environment",
        "creator_address": "0xc4d2...1f88",
        "funding_goal": 25000,
        "duration": 21,
        "raised_amount": 12230,
    },
]
