"""Reconcile the desired state of a service with a Pacemaker cluster primitive."""
