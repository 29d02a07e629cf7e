from api_model_gen.generator.base import ModelEmitter
from api_model_gen.generator.model import EMITTERS, ModelGenerator, get_emitter

__all__ = ["EMITTERS", "ModelEmitter", "ModelGenerator", "get_emitter"]
