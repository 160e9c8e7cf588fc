"""
Policies shipped with docs2gutenberg.

Each module registers its policy into :data:`docs2gutenberg.policies.REGISTRY`
when imported; :func:`docs2gutenberg.policies.load_policies` imports all of them.
"""
