"""Tierwise: subscription plans, proration and plan switching."""
