import numpy


class Material(object):
    name = None
    id = 0
    solid = True


class Air(Material):
    name = 'Air'
    id = 0
    solid = False


class Stone(Material):
    name = 'Stone'
    id = 1


class Grass(Material):
    name = 'Grass'
    id = 2


class Dirt(Material):
    name = 'Dirt'
    id = 3


class Bedrock(Material):
    name = 'Bedrock'
    id = 7


class FlowingWater(Material):
    name = 'Flowing Water'
    id = 8
    solid = False


class Water(Material):
    name = 'Water'
    id = 9
    solid = False


class Lava(Material):
    name = 'Lava'
    id = 11
    solid = False


class Sand(Material):
    name = 'Sand'
    id = 12


class Gravel(Material):
    name = 'Gravel'
    id = 13


class Sandstone(Material):
    name = 'Sandstone'
    id = 24


class Snow(Material):
    name = 'Snow'
    id = 80


class Ice(Material):
    name = 'Ice'
    id = 79


class Clay(Material):
    name = 'Clay'
    id = 82


MATERIALS = [Air, Stone, Grass, Dirt, Bedrock, FlowingWater, Water, Lava,
    Sand, Gravel, Sandstone, Ice, Snow, Clay]

MATERIAL_ID = dict((m.name, m.id) for m in MATERIALS)

# Indexed by material id; unknown ids count as solid.
MATERIAL_SOLID = numpy.ones(256, dtype=bool)
for m in MATERIALS:
    MATERIAL_SOLID[m.id] = m.solid

AIR = MATERIAL_ID['Air']
STONE = MATERIAL_ID['Stone']
GRASS = MATERIAL_ID['Grass']
DIRT = MATERIAL_ID['Dirt']
BEDROCK = MATERIAL_ID['Bedrock']
WATER = MATERIAL_ID['Water']
SAND = MATERIAL_ID['Sand']
SANDSTONE = MATERIAL_ID['Sandstone']
ICE = MATERIAL_ID['Ice']
