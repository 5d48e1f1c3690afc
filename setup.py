"""
Setup script for pricing_optimizer package.
"""

from setuptools import setup, find_packages

setup(
    name="tradenav-pricing-optimizer",
    version="1.0.0",
    description="Moteur d'optimisation de prix multi-scénarios (coûts, tarifs douaniers, élasticité)",
    author="TradeNavigatorPro Team",
    packages=find_packages(exclude=["*.tests", "*.tests.*", "scripts", "scripts.*"]),
    install_requires=[
        "supabase>=2.0.0",
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "python-dotenv>=1.0.0",
        "pytz>=2023.3",
        "python-dateutil>=2.8.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
