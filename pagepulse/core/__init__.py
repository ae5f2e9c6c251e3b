# ==============================================================================
# Core Domain Layer
# ==============================================================================
"""
Session lifecycle, activity monitoring, event batching and delivery.

Components, leaf-first:
- VisitorIdentity: durable pseudonymous visitor id
- ActivityMonitor: inactivity timer
- EventBatcher: event queue with size and interval flush triggers
- DeliveryClient: the four collector operations
- SessionManager: session state machine
- PageLifecycleBridge: page signals -> session and event operations
"""
