__version__ = "0.3.0"
__author__ = "Ben Davis"
__email__ = "bendavis78@gmail.com"
__license__ = "MIT"
__copyright__ = "2012-2022, Ben Davis"
