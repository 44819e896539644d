"""
Demo data generation and startup seeding.
"""
from .generators import DemoDataGenerator, DemoDataset
from .seed import ensure_admin_user, load_demo_dataset, seed_database

__all__ = [
    "DemoDataGenerator",
    "DemoDataset",
    "ensure_admin_user",
    "load_demo_dataset",
    "seed_database",
]
