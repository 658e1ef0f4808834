"""Validation package.

This package contains the two passes of a validation run and their console glue.

Design goals
------------
1) The stream validator runs first and collects every finding it can.
2) The cumulative reconciler runs only after a clean validation pass.
3) Structural errors abort; findings never do.
"""
