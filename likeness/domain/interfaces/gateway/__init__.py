from .model_gateway import ModelGateway

__all__ = ["ModelGateway"]
