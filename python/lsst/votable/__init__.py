# This file is part of lsst-votable.
#
# Developed for the LSST Data Management System.
# This product includes software developed by the LSST Project
# (https://www.lsst.org).
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Reading of VOTable documents into Astropy tables.

The entry points are `parse`, which returns a `ParsingResult` holding
separate metadata and data tables, and `VOTable`, which wraps the same
information in a single object.
"""

from ._columns import *
from ._coordinate_system import *
from ._datatypes import *
from ._epochs import *
from ._errors import *
from ._parser import *
from ._paths import *
from ._vocabularies import *
from ._votable import *
