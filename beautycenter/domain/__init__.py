"""Domain packages: one per entity, each with router, schemas, service and repository"""
