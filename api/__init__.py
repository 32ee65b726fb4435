"""
API HTTP para pantry-chef.

Esta capa expone endpoints REST que usan el core interno (pantry_chef_core)
para detectar ingredientes y proponer recetas.

La API está diseñada para ser consumida por:
- UI web (Next.js)
- Scripts de diagnóstico (tools/)
"""
