# reelsync/domain/events/event_dispatcher.py
import logging
from enum import Enum
from typing import Callable, Type

from .event_types import DomainEvent


class EventDispatcher:
    """
    Dispatches domain events to registered handlers.
    Handlers run synchronously in registration order.
    """
    def __init__(self):
        """Initialize the event dispatcher."""
        self.logger = logging.getLogger("domain.events.dispatcher")
        self.handlers = {}  # event_type -> list of handlers
        self.type_handlers = {}  # event class name -> list of handlers
        
    def register(self, event_type: Enum, handler: Callable[[DomainEvent], None]):
        """
        Register a handler for a specific event type.
        
        Args:
            event_type: Type of event to handle
            handler: Function to call when event occurs
        """
        self.handlers.setdefault(event_type, []).append(handler)
        self.logger.debug(f"Registered handler for event type: {event_type.name}")
        
    def register_for_class(self, event_class: Type[DomainEvent], handler: Callable[[DomainEvent], None]):
        """
        Register a handler for every event of a class.
        
        Args:
            event_class: Class of events to handle
            handler: Function to call when event occurs
        """
        class_name = event_class.__name__
        self.type_handlers.setdefault(class_name, []).append(handler)
        self.logger.debug(f"Registered handler for event class: {class_name}")
        
    def dispatch(self, event: DomainEvent):
        """
        Dispatch an event to all registered handlers.
        A failing handler is logged and does not stop the others.
        
        Args:
            event: Event to dispatch
        """
        all_handlers = (self.handlers.get(event.type, []) +
                        self.type_handlers.get(event.__class__.__name__, []))
        
        if not all_handlers:
            self.logger.debug(f"No handlers registered for event: {event}")
            return
            
        self.logger.debug(f"Dispatching event {event} to {len(all_handlers)} handlers")
        
        for handler in all_handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in event handler for {event.type.name}: {str(e)}")
                
    def unregister(self, event_type: Enum, handler: Callable[[DomainEvent], None]) -> bool:
        """
        Unregister a handler for a specific event type.
        
        Returns:
            True if handler was removed, False if not found
        """
        if handler in self.handlers.get(event_type, []):
            self.handlers[event_type].remove(handler)
            self.logger.debug(f"Unregistered handler for event type: {event_type.name}")
            return True
        return False
        
    def unregister_for_class(self, event_class: Type[DomainEvent],
                             handler: Callable[[DomainEvent], None]) -> bool:
        """
        Unregister a handler for a specific event class.
        
        Returns:
            True if handler was removed, False if not found
        """
        class_name = event_class.__name__
        if handler in self.type_handlers.get(class_name, []):
            self.type_handlers[class_name].remove(handler)
            self.logger.debug(f"Unregistered handler for event class: {class_name}")
            return True
        return False
