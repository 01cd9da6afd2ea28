"""Pure domain model: sale keys, schedules, pricing, errors and events."""
