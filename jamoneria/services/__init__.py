"""Business services: order store, checkout, reconciliation and outbound integrations."""
