"""Binding engine: compiles descriptors into callables and accessors."""

from .descriptors import MethodDescriptor, PropertyDescriptor
from .method import MethodBinding, compile_method
from .property import PropertyBinding, compile_property
from .namespace import Namespace, assemble_namespace
from .request_manager import RequestManager
